from enum import Enum


class MinimumSkill(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class Career(str, Enum):
    web_development = "Web Development"
    mobile_development = "Mobile Development"
    ui_ux = "UI/UX"
    data_science = "Data Science"
    business = "Business"
    other = "Other"
