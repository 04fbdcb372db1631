import enum
from typing import Annotated, Optional

from pydantic import AfterValidator


class Category(str, enum.Enum):
    EQUIPMENT = "equipment"
    MATERIALS = "materials"
    TOOLS = "tools"
    SERVICES = "services"
    PROPERTY = "property"
    TRANSPORT = "transport"


SUBCATEGORIES = (
    # equipment
    "excavators", "loaders", "cranes", "trucks", "concrete_mixers",
    # materials
    "bricks", "cement", "wood", "metal", "paint", "sand",
    "panels", "windows", "doors", "rare_stones", "parquet", "stairs",
    # tools
    "power_tools", "hand_tools", "measuring_tools", "ladders", "scaffolding",
    # services
    "repair", "construction", "design", "demolition", "cleaning",
    "moving_services", "consulting", "installation", "plumbing", "electrical",
    # other
    "furniture", "dsv", "mdf", "solid_wood", "other",
)


def check_subcategory(value):
    if value in (None, ""):
        return None
    if value not in SUBCATEGORIES:
        raise ValueError(f"Unknown subcategory: {value}")
    return value


Subcategory = Annotated[Optional[str], AfterValidator(check_subcategory)]
