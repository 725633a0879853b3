from nursery_cms import create_app

# Expose a WSGI-compatible app object for production servers (e.g., gunicorn, waitress)
app = create_app()

import os
import socket
import sys


def check_port(port):
    """Check if a port is available"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    result = sock.connect_ex(('127.0.0.1', port))
    sock.close()
    return result != 0


def find_available_port(start_port=5000, max_port=5100):
    """Find an available port starting from start_port"""
    for port in range(start_port, max_port):
        if check_port(port):
            return port
    return None


def print_startup_info(port):
    """Print startup information"""
    print("🚀 Starting Nursery CMS API")
    print("=" * 50)
    print(f"📍 Local URL: http://localhost:{port}/api/nurseries")
    print(f"📍 Storage backend: {app.config['STORAGE_BACKEND']}")
    print("=" * 50)
    if app.config.get('SEED_DEMO_DATA'):
        print("🔑 Default accounts (password from DEFAULT_ADMIN_PASSWORD):")
        print("  Super Admin: superadmin")
        print("  Nursery Admins: hayesadmin, uxbridgeadmin, hounslowadmin")
        print("=" * 50)
    print("⚠️  Press Ctrl+C to stop the server")
    print("=" * 50)


def main():
    """Main startup function for developer runs"""
    port = int(os.environ.get('PORT', 0)) or find_available_port()
    if not port:
        print("❌ No available ports found in range 5000-5100")
        return False

    print_startup_info(port)
    app.run(host='0.0.0.0', port=port, debug=True, use_reloader=False)
    return True


if __name__ == '__main__':
    try:
        sys.exit(0 if main() else 1)
    except KeyboardInterrupt:
        print("\n\n👋 Nursery CMS stopped by user")
        sys.exit(0)
