from enum import Enum


class UserRole(str, Enum):
    user = "user"
    publisher = "publisher"
    admin = "admin"
