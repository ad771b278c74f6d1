# db.py
"""
Database module using SQLAlchemy (SQLite).
Keeps a short history of past analyses (newest first, capped at
HISTORY_LIMIT entries). Results are stored as their exported JSON.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, Integer, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from linkaudit.config import DB_FILE, HISTORY_LIMIT
from linkaudit.app.report import to_dict
from linkaudit.app.scanner import AnalysisResult

DATABASE_URL = f"sqlite:///{DB_FILE}"

Base = declarative_base()
engine = None
SessionLocal = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Analysis(Base):
    __tablename__ = "analyses"
    id = Column(Integer, primary_key=True, index=True)
    url = Column(Text, index=True)
    host = Column(String(255), index=True)
    mode = Column(String(16))
    overall = Column(Integer)
    verdict = Column(String(64))
    result_json = Column(Text)  # exported AnalysisResult
    created_at = Column(DateTime, default=_utcnow, index=True)


def configure(database_url: str = DATABASE_URL) -> None:
    """(Re)bind the module to a database; tests point this at a temp file."""
    global engine, SessionLocal
    engine = create_engine(database_url, connect_args={"check_same_thread": False})
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)


def _summary(row: Analysis) -> Dict[str, Any]:
    return {
        "id": row.id,
        "url": row.url,
        "host": row.host,
        "mode": row.mode,
        "overall": row.overall,
        "verdict": row.verdict,
        "created_at": row.created_at.isoformat(),
    }


def save_analysis(result: AnalysisResult, limit: int = HISTORY_LIMIT) -> int:
    session = SessionLocal()
    try:
        row = Analysis(
            url=result.url,
            host=result.parsed.host,
            mode=result.mode.value,
            overall=result.scores.overall,
            verdict=result.labels.verdict,
            result_json=json.dumps(to_dict(result)),
        )
        session.add(row)
        session.flush()

        # keep only the newest `limit` entries
        stale = (session.query(Analysis)
                 .order_by(Analysis.created_at.desc(), Analysis.id.desc())
                 .offset(limit).all())
        for old in stale:
            session.delete(old)

        session.commit()
        return row.id
    finally:
        session.close()


def get_analysis(analysis_id: int) -> Optional[Dict[str, Any]]:
    session = SessionLocal()
    row = session.query(Analysis).filter(Analysis.id == analysis_id).first()
    session.close()
    if not row:
        return None
    item = _summary(row)
    item["result"] = json.loads(row.result_json)
    return item


def list_analyses(limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
    session = SessionLocal()
    rows = (session.query(Analysis)
            .order_by(Analysis.created_at.desc(), Analysis.id.desc())
            .offset(offset).limit(limit).all())
    session.close()
    return [_summary(r) for r in rows]


def delete_analysis(analysis_id: int) -> bool:
    session = SessionLocal()
    try:
        deleted = session.query(Analysis).filter(Analysis.id == analysis_id).delete()
        session.commit()
        return deleted > 0
    finally:
        session.close()


def clear_history() -> int:
    session = SessionLocal()
    try:
        deleted = session.query(Analysis).delete()
        session.commit()
        return deleted
    finally:
        session.close()


configure()
