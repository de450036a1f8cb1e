"""
Create test user
"""
from budgetbot.infrastructure.db.session import get_db
from budgetbot.auth import AuthError, register_user

db = next(get_db())

try:
    user = register_user(db, "Test User", "test@example.com", "password123")
    print("Created user:")
    print(f"  ID: {user.id}")
    print("  Email: test@example.com")
    print("  Password: password123")
except AuthError as e:
    print(f"Not created: {e}")
finally:
    db.close()
