# db.py
"""
Scan history using SQLAlchemy (SQLite).
Keeps the recent-scans list shown by the API; the analysis engine never
reads from it.
"""

import json
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional

from sqlalchemy import create_engine, Column, Integer, Text, DateTime
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import DB_FILE

DATABASE_URL = f"sqlite:///{DB_FILE}"

engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
Base = declarative_base()


class Scan(Base):
    __tablename__ = "scans"
    id = Column(Integer, primary_key=True, index=True)
    url = Column(Text, index=True)
    status = Column(Text)
    score = Column(Integer)
    ruleset = Column(Text)
    result_json = Column(Text)  # full AnalysisResult as JSON
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


def init_db():
    Base.metadata.create_all(bind=engine)


def save_scan(url: str, ruleset: str, result: Dict[str, Any]) -> int:
    session = SessionLocal()
    try:
        scan = Scan(
            url=url,
            status=result["status"],
            score=int(result["score"]),
            ruleset=ruleset,
            result_json=json.dumps(result),
        )
        session.add(scan)
        session.commit()
        session.refresh(scan)
        return scan.id
    finally:
        session.close()


def _summary(scan: Scan) -> Dict[str, Any]:
    return {
        "id": scan.id,
        "url": scan.url,
        "status": scan.status,
        "score": scan.score,
        "created_at": scan.created_at.isoformat(),
    }


def get_scan(scan_id: int) -> Optional[Dict[str, Any]]:
    session = SessionLocal()
    try:
        scan = session.query(Scan).filter(Scan.id == scan_id).first()
    finally:
        session.close()
    if not scan:
        return None
    item = _summary(scan)
    item["ruleset"] = scan.ruleset
    item["result"] = json.loads(scan.result_json)
    return item


def list_scans(limit: int = 5, offset: int = 0) -> List[Dict[str, Any]]:
    session = SessionLocal()
    try:
        rows = (
            session.query(Scan)
            .order_by(Scan.created_at.desc(), Scan.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
    finally:
        session.close()
    return [_summary(r) for r in rows]
