"""Email value object"""

from dataclasses import dataclass

from email_validator import validate_email, EmailNotValidError


@dataclass(frozen=True)
class Email:
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("Email required")
        try:
            result = validate_email(self.value, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email address: {self.value} ({e})")
        object.__setattr__(self, "value", result.normalized.lower())

    @property
    def domain(self) -> str:
        return self.value.split("@", 1)[1]

    @property
    def local_part(self) -> str:
        return self.value.split("@", 1)[0]

    def __str__(self) -> str:
        return self.value
