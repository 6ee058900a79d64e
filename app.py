"""
Postbox
=======

Run with:
    python app.py

Environment (or .env):
    DATABASE_URL  - SQLite database file (default: databases/postbox.db)
    PORT          - listen port (default: 3000)

Visit:
    http://localhost:3000              - Newsletters
    http://localhost:3000/api/newsletters - JSON API
"""

from flask import Flask
from postbox import Postbox
from postbox.core.config import Config

# Create Flask app
app = Flask(__name__)

# Initialize Postbox - this registers the pages and the API
postbox = Postbox(app)


if __name__ == '__main__':
    port = app.config['PORT']
    print(f"Server started on port {port}")
    app.run(host=app.config.get('HOST', Config.HOST), port=port, debug=False)
