# tests/conftest.py
import sys
from pathlib import Path

# Lets the suite run from a checkout without 'pip install -e .'
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
