"""
Custom validators
"""
import re

PERSONAL_CODE_PATTERN = re.compile(r'^\d{11}$')

_CHECKSUM_WEIGHTS = (1, 2, 3, 4, 5, 6, 7, 8, 9, 1)
_CHECKSUM_FALLBACK_WEIGHTS = (3, 4, 5, 6, 7, 8, 9, 1, 2, 3)


def _weighted_mod11(digits, weights) -> int:
    return sum(d * w for d, w in zip(digits, weights)) % 11


def validate_personal_code(code: str) -> bool:
    """
    Validate a Lithuanian personal code (asmens kodas).
    Format: GYYMMDDNNNC
      G    - gender and century, 1-6
      YYMMDD - date of birth
      NNN  - sequence number
      C    - mod 11 check digit
    """
    if not code or not PERSONAL_CODE_PATTERN.match(code):
        return False

    digits = [int(c) for c in code]

    if not 1 <= digits[0] <= 6:
        return False

    month = int(code[3:5])
    if not 1 <= month <= 12:
        return False

    day = int(code[5:7])
    if not 1 <= day <= 31:
        return False

    checksum = _weighted_mod11(digits[:10], _CHECKSUM_WEIGHTS)
    if checksum == 10:
        checksum = _weighted_mod11(digits[:10], _CHECKSUM_FALLBACK_WEIGHTS)
        if checksum == 10:
            checksum = 0

    return checksum == digits[10]


def mask_personal_code(code: str) -> str:
    """Hide the birth date and sequence: 387*****745"""
    if not code or len(code) != 11:
        return code
    return code[:3] + "*****" + code[8:]
