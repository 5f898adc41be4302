import os
import uvicorn
from dotenv import load_dotenv

if __name__ == "__main__":
    # Load .env from the project root (one level above backend/) before settings are read
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    env_path = os.path.join(project_root, ".env")
    if os.path.exists(env_path):
        print(f"Loading environment from {env_path}")
        load_dotenv(env_path)
    else:
        print(f".env not found at {env_path}, using defaults and process environment")

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    print("Starting Shop Admin API...")

    # String import path so uvicorn can resolve the app from backend/
    uvicorn.run("shop_admin.main:app", host=host, port=port, log_level="info", reload=False)
