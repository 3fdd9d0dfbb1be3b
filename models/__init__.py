from models.group import Group
from models.student import Student
from models.tuition_data import TuitionData

__all__ = [
    "Group",
    "Student",
    "TuitionData",
]
