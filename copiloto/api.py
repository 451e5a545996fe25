#FastAPI backend
from functools import lru_cache
from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .answer import Engine, answer_question, build_engine
from .config import load_settings
from .errors import CollaboratorError, InputError
from .hits import hits_to_payload
from .lang import is_rtl
from .logger import setup_logging


app = FastAPI(title="Copiloto - driver assistant")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class AskIn(BaseModel):
    question: Optional[str] = None
    lang: Optional[Literal["es", "pt", "ro", "ar"]] = None
    debug: bool = False


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    settings = load_settings()
    setup_logging(settings.log_level)
    return build_engine(settings)


@app.post("/api/ask")
def ask(q: AskIn):
    engine = get_engine()
    try:
        out = answer_question(engine, q.question, forced_lang=q.lang, debug=q.debug)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CollaboratorError as e:
        raise HTTPException(status_code=502, detail=e.to_dict())

    body = {
        "answer": out.answer,
        "route": out.route.value,
        "lang": out.lang,
        "rtl": is_rtl(out.lang),
        "hits": hits_to_payload(out.hits),
    }
    if q.debug:
        body["debug"] = out.debug
    return body


@app.get("/health")
def health():
    engine = get_engine()
    return {"ok": True, "manual_sections": len(engine.manual), "stations": len(engine.gas)}
