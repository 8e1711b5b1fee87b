# services/catalogs.py

from typing import Any, Dict, List

from app.models.questionnaire import SelectableOption

# Multi-select grids. Insertion order is display order.

CLIMBING_STYLE_OPTIONS = [
    SelectableOption(name="Slab"),
    SelectableOption(name="Overhanging"),
    SelectableOption(name="Roof"),
    SelectableOption(name="Vertical"),
    SelectableOption(name="Crimpy"),
    SelectableOption(name="Slopers"),
    SelectableOption(name="Pinches"),
    SelectableOption(name="Long"),
    SelectableOption(name="Short"),
    SelectableOption(name="Bouldery"),
]

# Names are unique: the payload only carries names, so a facility listed under
# both "Indoor Wall" and "Home" could never be told apart on reload.
TRAINING_FACILITY_OPTIONS = [
    SelectableOption(name="Lead Wall", category="Indoor Wall"),
    SelectableOption(name="Bouldering Wall", category="Indoor Wall"),
    SelectableOption(name="Climbing Board", category="Indoor Wall"),
    SelectableOption(name="Spray Wall", category="Indoor Wall"),
    SelectableOption(name="Circuit Board", category="Indoor Wall"),
    SelectableOption(name="Fingerboard", category="Indoor Wall"),
    SelectableOption(name="Campus Board", category="Indoor Wall"),
    SelectableOption(name="Pull-up Bar", category="Indoor Wall"),
    SelectableOption(name="Weights", category="Indoor Wall"),
]

# Also offered under "Home". Same options, listed twice only in the menu.
HOME_FACILITY_NAMES = ["Fingerboard", "Climbing Board", "Weights"]

# Rendered as chips but single-select
GENERAL_FITNESS_OPTIONS = [
    SelectableOption(name="Excellent", category="Fitness Level"),
    SelectableOption(name="Good", category="Fitness Level"),
    SelectableOption(name="Average", category="Fitness Level"),
    SelectableOption(name="Below Average", category="Fitness Level"),
    SelectableOption(name="Very Poor", category="Fitness Level"),
]

# Single-choice menus

REDPOINTING_MENU = ["None", "Low", "Medium", "High", "A lot"]
WORK_LIFE_BALANCE_MENU = ["Physically Demanding", "Somewhat Physical", "Mostly Desk", "Flexible/None"]
MOTIVATION_MENU = ["Low", "Medium", "High", "Very High"]
YES_NO_MENU = ["No", "Yes"]
CROSS_TRAINING_MENU = [f"{h}h per week" for h in range(1, 11)]

# Wheel pickers
HEIGHT_RANGE = [f"{cm} cm" for cm in range(100, 211)]
WEIGHT_RANGE = [f"{kg} kg" for kg in range(30, 121)]
AGE_RANGE = [f"{y} yrs" for y in range(10, 81)]
SLEEP_HOURS = [str(h) for h in range(4, 13)]
TRAINING_YEARS_RANGE = list(range(0, 41))


def facilities_by_category() -> Dict[str, List[SelectableOption]]:
    """Group facility options for the collapsible category list (sorted by category)."""
    grouped: Dict[str, List[SelectableOption]] = {}
    for option in TRAINING_FACILITY_OPTIONS:
        grouped.setdefault(option.category or "", []).append(option)
    by_name = {option.name: option for option in TRAINING_FACILITY_OPTIONS}
    grouped["Home"] = [by_name[name] for name in HOME_FACILITY_NAMES]
    return dict(sorted(grouped.items()))


def select_options(catalog: List[SelectableOption], names) -> List[SelectableOption]:
    """Catalog entries whose name is in `names`, in catalog order. Unknown names drop out."""
    wanted = set(names)
    return [option for option in catalog if option.name in wanted]


def option_menus() -> Dict[str, Any]:
    """Everything a renderer needs to draw the pickers and chip grids."""
    return {
        "climbing_styles": [o.name for o in CLIMBING_STYLE_OPTIONS],
        "training_facilities": {
            category: [o.name for o in options]
            for category, options in facilities_by_category().items()
        },
        "general_fitness": [o.name for o in GENERAL_FITNESS_OPTIONS],
        "redpointing_experience": REDPOINTING_MENU,
        "work_life_balance": WORK_LIFE_BALANCE_MENU,
        "motivation_level": MOTIVATION_MENU,
        "access_to_coaches": YES_NO_MENU,
        "time_for_cross_training": CROSS_TRAINING_MENU,
        "height": HEIGHT_RANGE,
        "weight": WEIGHT_RANGE,
        "age": AGE_RANGE,
        "sleep_hours": SLEEP_HOURS,
        "training_experience_years": TRAINING_YEARS_RANGE,
    }
