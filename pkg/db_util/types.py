from dataclasses import dataclass


@dataclass
class MongoConfig:
    uri: str
    database: str = "ifcodeLogsDB"
    server_selection_timeout_ms: int = 5000
    max_pool_size: int = 20
    app_name: str = "topizio-bot"
