import re
from typing import List, Tuple


class PasswordValidator:
    MIN_LENGTH = 8
    MAX_LENGTH = 128

    def __init__(self):
        self.common_sequences = [
            # Numeric sequences
            '0123456789', '9876543210',
            # Alphabetic sequences
            'abcdefghijklmnopqrstuvwxyz', 'zyxwvutsrqponmlkjihgfedcba',
            # Keyboard sequences
            'qwertyuiop', 'asdfghjkl', 'zxcvbnm',
            '1qaz2wsx', '1q2w3e4r'
        ]

        self.common_passwords = [
            'password', 'password1', '123456', '12345678', 'qwerty', 'admin', 'admin123',
            'welcome', 'welcome1', 'letmein', 'nursery', 'nursery1', 'children1', 'monkey',
        ]

    def check_sequential_patterns(self, password: str) -> List[str]:
        """Check for repeated characters and common runs of four or more."""
        issues = []

        if re.search(r'(.)\1{2,}', password):
            issues.append("Password contains a character repeated three or more times")

        lowered = password.lower()
        for seq in self.common_sequences:
            for start in range(len(seq) - 3):
                if seq[start:start + 4] in lowered:
                    issues.append(f"Password contains a common sequence: {seq[start:start + 4]}")
                    break

        return issues

    def check_common_passwords(self, password: str) -> bool:
        """Check if the password is in the list of common passwords."""
        return password.lower() in self.common_passwords

    def validate_password(self, password: str) -> Tuple[bool, List[str]]:
        """Validate password strength and return (is_valid, issues)."""
        if not isinstance(password, str):
            return False, ["Password must be a string"]

        issues = []

        if len(password) < self.MIN_LENGTH:
            issues.append(f"Password must be at least {self.MIN_LENGTH} characters long")
        if len(password) > self.MAX_LENGTH:
            issues.append(f"Password must be at most {self.MAX_LENGTH} characters long")

        issues.extend(self.check_sequential_patterns(password))

        if self.check_common_passwords(password):
            issues.append("Password is too common and easily guessable")

        if not re.search(r'\d', password):
            issues.append("Password must contain at least one number")
        if not re.search(r'[A-Za-z]', password):
            issues.append("Password must contain at least one letter")

        return len(issues) == 0, issues
