# face_attendance/config_loader.py
import configparser
import os
from dataclasses import dataclass


def load_config(config_file='config.ini'):
    """Loads the configuration file."""
    config = configparser.ConfigParser()
    if not os.path.exists(config_file):
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    config.read(config_file)

    # Environment wins over the file for the connection string
    mongo_uri = os.getenv("MONGO_URI")
    if mongo_uri:
        if not config.has_section('MongoDB'):
            config.add_section('MongoDB')
        config.set('MongoDB', 'uri', mongo_uri)

    log_file = config.get('Paths', 'log_file', fallback=None)
    if log_file:
        dir_name = os.path.dirname(log_file)
        # Only create if dir_name is not an empty string
        if dir_name:
            os.makedirs(dir_name, exist_ok=True)

    return config


@dataclass(frozen=True)
class Settings:
    """Matching and check-in policy values read once from config.ini."""
    similarity_threshold: float = 0.95
    ambiguity_margin: float = 0.01
    embedding_dim: int = 128
    cooldown_seconds: float = 60.0

    @classmethod
    def from_config(cls, config):
        return cls(
            similarity_threshold=config.getfloat('Matching', 'similarity_threshold', fallback=0.95),
            ambiguity_margin=config.getfloat('Matching', 'ambiguity_margin', fallback=0.01),
            embedding_dim=config.getint('Matching', 'embedding_dim', fallback=128),
            cooldown_seconds=config.getfloat('Attendance', 'cooldown_seconds', fallback=60.0),
        )
