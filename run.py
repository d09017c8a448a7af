"""Local development entry point.

Usage:
    python run.py

Reads .env, then serves the CRM API on port 5001 with the debugger on.
"""

from dotenv import load_dotenv

load_dotenv()  # Load .env before anything else

from mortgage_crm import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5001)
