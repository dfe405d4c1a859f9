import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse, Response

from gateway.config import Settings
from providers.openai import ApiError, DeserializationError, OpenAIClient, TransportError
from wire import ChatRequest

logger = logging.getLogger(__name__)

app = FastAPI(title="kubellm gateway", version="0.1.0")


@app.on_event("startup")
async def startup_event() -> None:
    # A missing API key aborts startup
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    app.state.client = OpenAIClient(settings.api_key, base_url=settings.base_url)
    logger.info("Gateway forwarding to %s", settings.base_url)


@app.on_event("shutdown")
async def shutdown_event() -> None:
    client = getattr(app.state, "client", None)
    if isinstance(client, OpenAIClient):
        await client.aclose()


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}


@app.post("/v1/chat/completions")
async def chat_completions(req: ChatRequest):
    client: OpenAIClient = app.state.client

    if req.stream:
        raise HTTPException(status_code=400, detail="Streaming responses are not supported")

    logger.info("Received request for model %s with %d messages", req.model, len(req.messages))
    try:
        resp = await client.chat(req)
    except ApiError as e:
        logger.warning("Upstream rejected request (%s): %s", e.status_code, e.body)
        return Response(status_code=e.status_code, content=e.body, media_type="text/plain")
    except DeserializationError as e:
        logger.error("Upstream returned an unexpected body: %s", e)
        raise HTTPException(status_code=502, detail="Upstream returned an unexpected response")
    except TransportError as e:
        logger.error("Upstream unreachable: %s", e)
        raise HTTPException(status_code=502, detail=f"Upstream unreachable: {e}")

    logger.info("Prompt tokens:     %d", resp.usage.prompt_tokens)
    logger.info("Completion tokens: %d", resp.usage.completion_tokens)
    logger.info("Total tokens:      %d", resp.usage.total_tokens)
    return JSONResponse(status_code=200, content=resp.model_dump(mode="json"))
