"""
Punto de entrada: python -m forja
"""
from forja.cli.app import app

if __name__ == "__main__":
    app()
