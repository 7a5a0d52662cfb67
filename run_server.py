import uvicorn

from portfolio import settings

if __name__ == "__main__":
    print(f"Starting server at http://localhost:{settings.PORT}")
    uvicorn.run(
        "portfolio.api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True
    )
