BUILTIN_EXERCISES = (
    "Bench Press",
    "Incline Bench Press",
    "Decline Bench Press",
    "Dumbbell Bench Press",
    "Incline Dumbbell Press",
    "Chest Fly",
    "Cable Crossover",
    "Push Up",
    "Dip",
    "Overhead Press",
    "Dumbbell Shoulder Press",
    "Arnold Press",
    "Lateral Raise",
    "Front Raise",
    "Rear Delt Fly",
    "Face Pull",
    "Upright Row",
    "Shrug",
    "Deadlift",
    "Romanian Deadlift",
    "Sumo Deadlift",
    "Barbell Row",
    "Dumbbell Row",
    "Seated Cable Row",
    "T-Bar Row",
    "Lat Pulldown",
    "Pull Up",
    "Chin Up",
    "Squat",
    "Front Squat",
    "Hack Squat",
    "Leg Press",
    "Lunge",
    "Bulgarian Split Squat",
    "Leg Extension",
    "Leg Curl",
    "Hip Thrust",
    "Calf Raise",
    "Barbell Curl",
    "Dumbbell Curl",
    "Hammer Curl",
    "Preacher Curl",
    "Tricep Pushdown",
    "Skull Crusher",
    "Overhead Tricep Extension",
    "Close Grip Bench Press",
    "Crunch",
    "Hanging Leg Raise",
    "Plank",
    "Cable Crunch",
)


def is_builtin(name: str) -> bool:
    return name in BUILTIN_EXERCISES
