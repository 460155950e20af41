import time

import fittrack
from fittrack import UserPatch, Workout


def main() -> None:
    tracker = fittrack.run(port=57794)

    tracker.add_user("1", "Alice", 30, 70, 165)
    tracker.add_user("2", "Bob", 25, 80, 175)

    tracker.log_workout("1", Workout(type="running", duration=30, calories_burned=300))
    tracker.log_workout("1", Workout(type="yoga", duration=45, calories_burned=200))

    print(tracker.get_all_workouts_of("1"))
    print(tracker.get_all_workouts_by_type("1", "running"))

    tracker.update_user("1", UserPatch(age=31, weight=72))
    print(tracker.get_user("1"))
    print(tracker.get_users())

    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
