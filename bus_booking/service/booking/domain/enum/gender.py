from enum import StrEnum


class Gender(StrEnum):
    MALE = 'MALE'
    FEMALE = 'FEMALE'
    OTHER = 'OTHER'
