"""Client-side form state: field validation, touched tracking, password strength."""
import re
from collections import namedtuple
from typing import Optional

from taskboard.client.api import ApiError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
TASK_STATUSES = ("pending", "in_progress", "done")

PasswordStrength = namedtuple("PasswordStrength", ["score", "label", "color"])

_STRENGTHS = [
    ("Very Weak", "red"),
    ("Weak", "orange"),
    ("Fair", "yellow"),
    ("Good", "blue"),
    ("Strong", "green"),
]


def password_strength(password: str) -> PasswordStrength:
    if not password:
        return PasswordStrength(0, "", "gray")

    score = 0
    if len(password) >= 6:
        score += 1
    if re.search(r"[a-z]", password):
        score += 1
    if re.search(r"[A-Z]", password):
        score += 1
    if re.search(r"\d", password):
        score += 1
    if re.search(r"[!@#$%^&*]", password):
        score += 1

    if score == 0:
        return PasswordStrength(0, "", "gray")
    label, color = _STRENGTHS[min(score - 1, 4)]
    return PasswordStrength(score, label, color)


def _email_error(value: str) -> str:
    if not value.strip():
        return "Email is required"
    if not EMAIL_PATTERN.match(value):
        return "Please enter a valid email address"
    return ""


class Form:
    """Values, per-field errors and touched flags for one form.

    Errors are only shown for touched fields: a field becomes touched on
    blur or when the whole form is validated on submit.
    """

    fields = ()

    def __init__(self, **values):
        unknown = set(values) - set(self.fields)
        if unknown:
            raise TypeError(f"unknown fields: {', '.join(sorted(unknown))}")
        self.values = {name: values.get(name, "") for name in self.fields}
        self.errors = {name: "" for name in self.fields}
        self.touched = {name: False for name in self.fields}
        self.form_error = ""

    def validate_field(self, name: str, value) -> str:
        raise NotImplementedError

    def _dependents(self, name: str):
        return ()

    def change(self, name: str, value) -> None:
        self.values[name] = value
        self.form_error = ""
        if self.touched[name]:
            self.errors[name] = self.validate_field(name, value)
        for other in self._dependents(name):
            if self.touched[other]:
                self.errors[other] = self.validate_field(other, self.values[other])

    def blur(self, name: str) -> None:
        self.touched[name] = True
        self.errors[name] = self.validate_field(name, self.values[name])

    def validate(self) -> bool:
        for name in self.fields:
            self.touched[name] = True
            self.errors[name] = self.validate_field(name, self.values[name])
        return self.is_valid

    @property
    def is_valid(self) -> bool:
        return not any(self.validate_field(name, self.values[name]) for name in self.fields)

    def visible_errors(self) -> dict:
        return {name: err for name, err in self.errors.items() if err and self.touched[name]}

    def first_error_field(self) -> Optional[str]:
        for name in self.fields:
            if self.errors[name]:
                return name
        return None

    def apply_server_errors(self, error: ApiError) -> None:
        """Show a failed submission: field errors on their fields, the rest as a form error."""
        matched = False
        for name, messages in (error.errors or {}).items():
            if name in self.errors and messages:
                self.errors[name] = messages[0]
                self.touched[name] = True
                matched = True
        if not matched:
            self.form_error = error.message

    def data(self) -> dict:
        return dict(self.values)


class LoginForm(Form):
    fields = ("email", "password")

    def validate_field(self, name, value):
        if name == "email":
            return _email_error(value)
        if name == "password":
            if not value:
                return "Password is required"
            if len(value) < 6:
                return "Password must be at least 6 characters"
        return ""


class RegisterForm(Form):
    fields = ("name", "email", "password", "password_confirmation")

    def _dependents(self, name):
        return ("password_confirmation",) if name == "password" else ()

    def validate_field(self, name, value):
        if name == "name":
            value = value.strip()
            if not value:
                return "Name is required"
            if len(value) < 2:
                return "Name must be at least 2 characters"
            if len(value) > 50:
                return "Name must be less than 50 characters"
        elif name == "email":
            return _email_error(value)
        elif name == "password":
            if not value:
                return "Password is required"
            if len(value) < 6:
                return "Password must be at least 6 characters"
            if not re.search(r"[a-z]", value):
                return "Password must contain at least one lowercase letter"
            if not re.search(r"[A-Z]", value):
                return "Password must contain at least one uppercase letter"
            if not re.search(r"\d", value):
                return "Password must contain at least one number"
        elif name == "password_confirmation":
            if not value:
                return "Please confirm your password"
            if value != self.values["password"]:
                return "Passwords do not match"
        return ""

    @property
    def strength(self) -> PasswordStrength:
        return password_strength(self.values["password"])

    def data(self):
        data = dict(self.values)
        data["name"] = data["name"].strip()
        return data


class TaskForm(Form):
    fields = ("title", "description", "status")

    def __init__(self, **values):
        values.setdefault("status", "pending")
        super().__init__(**values)

    @classmethod
    def from_task(cls, task: dict) -> "TaskForm":
        return cls(title=task["title"], description=task.get("description") or "", status=task["status"])

    def validate_field(self, name, value):
        if name == "title":
            if not value.strip():
                return "Title is required"
            if len(value.strip()) > 255:
                return "Title must be at most 255 characters"
        elif name == "status" and value not in TASK_STATUSES:
            return "Status must be one of: " + ", ".join(TASK_STATUSES)
        return ""

    def data(self):
        return {
            "title": self.values["title"].strip(),
            "description": self.values["description"] or None,
            "status": self.values["status"],
        }
