# server.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from agents.field_assistant import FieldAssistant
from core.errors import InvalidRequestError
from core.models import ChatbotRequest

# Initialize FastAPI
app = FastAPI(title="Field Data Assistant")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

assistant = FieldAssistant()

@app.post("/chatbot")
def chatbot(request: ChatbotRequest):
    """
    Answer a field data question. The reply comes from Gemini when a key is
    available, otherwise from canned guidance. Persisting the exchange is up to the caller.
    """
    print(f"Received chat message from {request.user_id}")
    try:
        reply = assistant.resolve(request)
    except InvalidRequestError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    return {"response": reply}

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8001)
