from pathlib import Path

from setuptools import find_packages, setup


def _requirements(name: str) -> list:
    path = Path(__file__).resolve().parent / name
    return [line.strip() for line in path.read_text(encoding="utf-8").splitlines() if line.strip() and not line.startswith("#")]


setup(
    name="ChillAI",
    version="1.0",
    packages=find_packages(include=["chillai", "chillai.*"]),
    py_modules=["cli"],
    package_data={"chillai": ["configs/*.yaml"]},
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=_requirements("requirements.txt"),
    extras_require={
        "tracking": ["mlflow>=2.0"],
        "test": ["pytest>=7.0"],
    },
    entry_points={"console_scripts": ["chillai=cli:main"]},
)
