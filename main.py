"""Streamlit Entry Point - Root Module.

Run the dashboard with:

    streamlit run main.py

It imports from the src package.
"""

from src.main import run_dashboard


run_dashboard()
