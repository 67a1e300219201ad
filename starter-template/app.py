"""
News Portal Starter
===================

Run with:
    python app.py

Visit:
    http://localhost:5000                    - Home page
    http://localhost:5000/admin/setup-user   - Create the first admin (once)
    http://localhost:5000/login              - Admin login
    http://localhost:5000/admin/articles/    - Admin panel
"""

from newsportal import create_app
from newsportal.core.config import Config

app = create_app()


if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("News Portal")
    print("=" * 60)
    print(f"Homepage:        http://localhost:{Config.port}")
    print(f"Admin Setup:     http://localhost:{Config.port}/admin/setup-user")
    print(f"Admin Login:     http://localhost:{Config.port}/login")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=True)
