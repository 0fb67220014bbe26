from setuptools import setup, find_packages

setup(
    name="gemini-ai-sdk",
    version="1.0.2",
    description="The simpler Google Gemini SDK",
    license="GPL-3.0",
    python_requires=">=3.9",
    # Library packages live in tools/lib
    package_dir={"": "tools/lib"},
    packages=find_packages(where="tools/lib"),
    install_requires=[
        "google-genai>=1.20.0",
        "httpx>=0.27",
        "filetype>=1.2.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "gemini-ask=gemini_ai_sdk.cli:main",
        ],
    },
)
