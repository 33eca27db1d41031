import os
from dotenv import load_dotenv

# Variables de .env antes de crear la app
load_dotenv()

from nexo_clinic import create_app

app = create_app()

if __name__ == "__main__":
    debug = os.getenv("FLASK_ENV", "development") == "development"
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 5000)), debug=debug)
