from fastapi import FastAPI
from trailerflow.main import app as trailerflow_app  # Import trailerflow app

# Initialize the main FastAPI application
main_app = FastAPI()

# Manually add the trailerflow routes, without its docs routes
for route in trailerflow_app.routes:
    if route.path not in ("/docs", "/docs/oauth2-redirect", "/redoc", "/openapi.json"):
        main_app.router.routes.append(route)

# Run the main app
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(main_app, host="0.0.0.0", port=7860)
