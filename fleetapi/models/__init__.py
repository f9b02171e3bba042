from .enroll_type import (
    EnrollmentType,
    decode_enrollment_type,
    encode_enrollment_type,
)
from .enroll import EnrollItemResponse, EnrollRequest, EnrollResponse, Metadata

__all__ = [
    "EnrollmentType",
    "decode_enrollment_type",
    "encode_enrollment_type",
    "EnrollRequest",
    "EnrollResponse",
    "EnrollItemResponse",
    "Metadata",
]
