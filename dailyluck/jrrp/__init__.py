# dailyluck/jrrp/__init__.py
from flask import Blueprint

bp = Blueprint("jrrp", __name__, url_prefix="/jrrp")
