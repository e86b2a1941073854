# dailyluck/db.py
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
