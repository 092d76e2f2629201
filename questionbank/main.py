"""FastAPI application entry point."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from questionbank.api import knowledge_areas, topics
from questionbank.core.config import configure_logging, settings

configure_logging()

app = FastAPI(title="Question Bank", version="1.0.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(knowledge_areas.router, prefix="/knowledgearea", tags=["knowledge-areas"])
app.include_router(topics.router, prefix="/topic", tags=["topics"])


@app.get("/")
def read_root():
    return {"message": "Question Bank API"}
