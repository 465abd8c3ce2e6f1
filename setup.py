# setup.py
from setuptools import setup, find_packages

install_requires = [
    # --- UI ---
    "flet>=0.28.0,<1.0",

    # --- MODELS & CONFIG ---
    "pydantic>=2.0.0",
    "python-dotenv>=1.0.0",
    "pyyaml>=6.0.0",

    # --- HTTP ---
    "httpx>=0.27.0", # Backend API and hosted auth provider clients
]

extras_require = {
    # --- TESTS ---
    "test": [
        "pytest-asyncio==1.3.0",
        "pytest",
    ],
}

setup(
    name="virtuohub-client",
    version="0.3.0",
    description="VirtuoHub client core: deferred-intent sign-in gate and gated actions",
    packages=find_packages(include=["virtuohub", "virtuohub.*"]),
    package_data={"virtuohub.shared.config": ["settings/*.yaml"]},
    include_package_data=True,
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "virtuohub=virtuohub.client.main:run",
        ],
    },
    python_requires=">=3.11",
)
