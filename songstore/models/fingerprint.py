from sqlalchemy import BigInteger, Index
from sqlalchemy.orm import Mapped, mapped_column

from songstore.models import Base


class Fingerprint(Base):
    """One (address, anchor time, song) occurrence in the inverted index.

    The primary key leads with ``address`` so lookups by address use it
    directly. ``song_id`` refers to ``songs.id`` without a foreign key:
    deleting a song leaves its couples in place.
    """

    __tablename__ = "fingerprints"

    address: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    anchor_time_ms: Mapped[int] = mapped_column(
        "anchorTimeMs", BigInteger, primary_key=True, autoincrement=False
    )
    song_id: Mapped[int] = mapped_column(
        "songID", BigInteger, primary_key=True, autoincrement=False
    )

    __table_args__ = (Index("ix_fingerprints_song_id", "songID"),)
