"""Built-in server definitions for known Minecraft APIs."""

from typing import Dict

from universeapi.domain.config.server import AuthDefinition, ServerDefinition

KNOWN_SERVERS: Dict[str, ServerDefinition] = {
    "EarthMC": ServerDefinition(
        base_url="https://api.earthmc.net",
        version="v3",
        endpoints={
            "server": "aurora",
            "towns": "aurora/towns",
            "nations": "aurora/nations",
            "players": "aurora/players",
            "quarters": "aurora/quarters",
            "location": "aurora/location",
            "nearby": "aurora/nearby",
            "discord": "aurora/discord",
        },
    ),
    "Hypixel": ServerDefinition(
        base_url="https://api.hypixel.net",
        version="v2",
        endpoints={
            "player": "player",
            "status": "status",
            "guild": "guild",
            "counts": "counts",
            "punishments": "punishmentstats",
            "skyblock_profiles": "skyblock/profiles",
            "skyblock_bazaar": "skyblock/bazaar",
        },
        auth=AuthDefinition(
            header="API-Key",
            env_var="HYPIXEL_API_KEY",
            description="Key from the Hypixel developer dashboard",
        ),
    ),
    "Mojang": ServerDefinition(
        base_url="https://api.mojang.com",
        endpoints={
            "profile": "users/profiles/minecraft",
            "profiles": "profiles/minecraft",
        },
    ),
    "MCSrvStat": ServerDefinition(
        base_url="https://api.mcsrvstat.us",
        endpoints={
            "java": "3",
            "bedrock": "bedrock/3",
            "icon": "icon",
            "simple": "simple",
        },
    ),
    "Wynncraft": ServerDefinition(
        base_url="https://api.wynncraft.com",
        version="v3",
        endpoints={
            "player": "player",
            "guild": "guild",
            "leaderboards": "leaderboards/types",
            "news": "latest-news",
            "search": "search",
        },
    ),
}
