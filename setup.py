from setuptools import setup

setup(
    name="langterm",
    version="1.0.0",
    description="Natural language to shell commands using a local Ollama model",
    python_requires=">=3.9",
    py_modules=[
        "main",
        "command_engine",
        "preferences",
        "session",
        "executor",
        "errors",
        "i18n",
    ],
    data_files=[("share/langterm/locales", ["locales/en.json"])],
    install_requires=[
        "requests",
        "rich",
        "prompt_toolkit",
        "pygments",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "langterm=main:main",
        ],
    },
)
