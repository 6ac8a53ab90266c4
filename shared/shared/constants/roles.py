from enum import Enum


class Role(str, Enum):
    USER = "user"
    TEACHER = "teacher"
    ADMIN = "admin"
