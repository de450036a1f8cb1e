"""
Reset a user's password

Run:  python reset_password.py user@example.com NewPassword
"""
import sys

from budgetbot.infrastructure.db.session import get_db
from budgetbot.auth import MIN_PASSWORD_LENGTH, get_user_by_email, hash_password

if len(sys.argv) != 3:
    print(__doc__.strip())
    sys.exit(2)

email, new_password = sys.argv[1], sys.argv[2]
if len(new_password) < MIN_PASSWORD_LENGTH:
    print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    sys.exit(1)

db = next(get_db())
try:
    user = get_user_by_email(db, email)
    if not user:
        print(f"User not found: {email}")
        sys.exit(1)

    user.password_hash = hash_password(new_password)
    db.commit()
    print(f"Password reset done for: {user.email}")
finally:
    db.close()
