import datetime

from voxelforge import db


class GenerationRun(db.Model):
    """One recorded generation: enough to replay it exactly (seed + normalized config)."""

    __tablename__ = 'generation_runs'
    id = db.Column(db.Integer, primary_key=True)
    seed = db.Column(db.BigInteger, nullable=False)
    config = db.Column(db.JSON, nullable=False, default=dict)
    rooms_placed = db.Column(db.Integer, nullable=False, default=0)
    rooms_target = db.Column(db.Integer, nullable=False, default=0)
    edges_chosen = db.Column(db.Integer, nullable=False, default=0)
    edges_carved = db.Column(db.Integer, nullable=False, default=0)
    edges_skipped = db.Column(db.Integer, nullable=False, default=0)
    start_room = db.Column(db.Integer, nullable=True)
    end_room = db.Column(db.Integer, nullable=True)
    replay_of = db.Column(db.Integer, db.ForeignKey('generation_runs.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)

    @classmethod
    def from_dungeon(cls, dungeon, replay_of=None) -> "GenerationRun":
        return cls(
            seed=dungeon.seed,
            config=dict(dungeon.config.to_dict(), seed=dungeon.seed),
            rooms_placed=len(dungeon.rooms),
            rooms_target=dungeon.config.room_count,
            edges_chosen=len(dungeon.graph.chosen),
            edges_carved=len(dungeon.carved_edges),
            edges_skipped=len(dungeon.skipped_edges),
            start_room=dungeon.start_room,
            end_room=dungeon.end_room,
            replay_of=replay_of,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'seed': self.seed,
            'config': self.config,
            'rooms_placed': self.rooms_placed,
            'rooms_target': self.rooms_target,
            'edges_chosen': self.edges_chosen,
            'edges_carved': self.edges_carved,
            'edges_skipped': self.edges_skipped,
            'start_room': self.start_room,
            'end_room': self.end_room,
            'replay_of': self.replay_of,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<GenerationRun {self.id} seed={self.seed}>'
