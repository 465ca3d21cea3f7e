"""Allow ``python -m porttown``."""
from .main import main

main()
