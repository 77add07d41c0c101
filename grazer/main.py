from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from grazer.routers import metrics

app = FastAPI(
    title="Grazer Metrics Server",
    description="API for static code metrics of files and directory trees.",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for local development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include Routers
app.include_router(metrics.router)

@app.get("/api-status")
async def root():
    return {"message": "Grazer Metrics Server is running. Visit /docs for API documentation."}
