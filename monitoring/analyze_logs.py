import json
import os
from collections import Counter

ACTION_LOG = os.getenv("KINO_ACTION_LOG", "../logs/user_actions.log")

groups = {
    "bookings_created": {"CREATE_BOOKING"},
    "bookings_cancelled": {"CANCEL_BOOKING"},
    "logins": {"LOGIN", "REGISTER"},
    "admin_changes": {
        "ADMIN_SAVE_MOVIE", "ADMIN_DELETE_MOVIE",
        "ADMIN_SAVE_HALL", "ADMIN_DELETE_HALL",
        "ADMIN_SAVE_SESSION", "ADMIN_DELETE_SESSION",
        "ADMIN_BOOKING_STATUS",
    },
}


def analyze_logs(path: str = ACTION_LOG) -> Counter:
    metrics = Counter()
    if not os.path.exists(path):
        return metrics

    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                metrics["malformed"] += 1
                continue
            action = entry.get("action")
            for key, actions in groups.items():
                if action in actions:
                    metrics[key] += 1
            if action == "CREATE_BOOKING":
                metrics["revenue"] += entry.get("details", {}).get("total_price", 0)
    return metrics


if __name__ == "__main__":
    metrics = analyze_logs()

    print("=== Monitoring metrics ===")
    print(f"Bookings created: {metrics['bookings_created']}")
    print(f"Bookings cancelled: {metrics['bookings_cancelled']}")
    print(f"Sign-ins: {metrics['logins']}")
    print(f"Admin changes: {metrics['admin_changes']}")
    print(f"Booked revenue (estimate): {metrics['revenue']}")
    print(f"Malformed lines: {metrics['malformed']}")
