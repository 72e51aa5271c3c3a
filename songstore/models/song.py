from sqlalchemy import BigInteger, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from songstore.models import Base


class Song(Base):
    __tablename__ = "songs"

    # Externally generated uint32, never assigned by the database
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    artist: Mapped[str] = mapped_column(Text, nullable=False)
    yt_id: Mapped[str] = mapped_column("ytID", Text, nullable=False, default="")

    # Derived from (title, artist); the deduplication key
    key: Mapped[str] = mapped_column(Text, unique=True, nullable=False)

    __table_args__ = (Index("ix_songs_ytid", "ytID"),)

    def __repr__(self) -> str:
        return f"<Song(id={self.id}, key={self.key!r})>"
