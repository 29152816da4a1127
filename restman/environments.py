import time
from typing import Dict, Optional

from .models import Environment, EnvironmentsConfig


def default_environments() -> EnvironmentsConfig:
    return EnvironmentsConfig(
        active_environment_id=1,
        environments=[
            Environment(id=1, name="Development", variables={
                "BASE_URL": "http://localhost:3000",
                "API_KEY": "dev-api-key-12345",
                "AUTH_TOKEN": "Bearer dev-token",
            }),
            Environment(id=2, name="Staging", variables={
                "BASE_URL": "https://staging.example.com",
                "API_KEY": "staging-api-key-67890",
                "AUTH_TOKEN": "Bearer staging-token",
            }),
            Environment(id=3, name="Production", variables={
                "BASE_URL": "https://api.example.com",
                "API_KEY": "prod-api-key-secure",
                "AUTH_TOKEN": "Bearer prod-token",
            }),
        ],
    )


def get_active_environment(config: EnvironmentsConfig) -> Optional[Environment]:
    if config.active_environment_id is None:
        return None
    for env in config.environments:
        if env.id == config.active_environment_id:
            return env
    return None


def active_variables(config: EnvironmentsConfig) -> Dict[str, str]:
    env = get_active_environment(config)
    return dict(env.variables) if env else {}


def new_environment_id(config: EnvironmentsConfig) -> int:
    """Millisecond clock, bumped past existing ids to stay unique."""
    candidate = int(time.time() * 1000)
    existing = [env.id for env in config.environments]
    if existing and candidate <= max(existing):
        candidate = max(existing) + 1
    return candidate


def set_active_environment(config: EnvironmentsConfig, environment_id: int) -> EnvironmentsConfig:
    return config.model_copy(update={"active_environment_id": environment_id})


def add_environment(config: EnvironmentsConfig, name: str, variables: Dict[str, str]) -> EnvironmentsConfig:
    env = Environment(id=new_environment_id(config), name=name, variables=dict(variables))
    return config.model_copy(update={"environments": [*config.environments, env]})


def update_environment(config: EnvironmentsConfig, environment_id: int, name: str,
                       variables: Dict[str, str]) -> EnvironmentsConfig:
    environments = [
        env.model_copy(update={"name": name, "variables": dict(variables)}) if env.id == environment_id else env
        for env in config.environments
    ]
    return config.model_copy(update={"environments": environments})


def delete_environment(config: EnvironmentsConfig, environment_id: int) -> EnvironmentsConfig:
    remaining = [env for env in config.environments if env.id != environment_id]
    active_id = config.active_environment_id
    if active_id == environment_id:
        active_id = remaining[0].id if remaining else None
    return EnvironmentsConfig(active_environment_id=active_id, environments=remaining)
