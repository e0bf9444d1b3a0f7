import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.extensions import db
# Import all model files
import models  # noqa: F401


def create_tables():
    db.drop_all()
    db.create_all()
    print("All tables created successfully!")


if __name__ == "__main__":
    from src.main import create_app
    app = create_app()
    with app.app_context():
        create_tables()
