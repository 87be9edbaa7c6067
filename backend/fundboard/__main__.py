"""Run the server: python -m fundboard"""
import uvicorn
from .config import get_settings


def main():
    settings = get_settings()
    uvicorn.run("fundboard.main:create_app", factory=True, host="0.0.0.0", port=settings.PORT)


if __name__ == '__main__':
    main()
