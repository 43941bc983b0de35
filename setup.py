"""
Setup script for resort_pricing package.
"""

from setuptools import setup, find_packages

setup(
    name="resort-pricing",
    version="1.0.0",
    description="Moteur de pricing saisonnier et dynamique pour le resort (chalets, piscine, restaurant)",
    author="Resort Team",
    packages=find_packages(exclude=["*.tests", "*.tests.*"]),
    install_requires=[
        "supabase>=2.0.0",
        "pandas>=2.0.0",
        "numpy>=1.24.0",
        "python-dotenv>=1.0.0",
        "pytz>=2023.3",
        "python-dateutil>=2.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "resort-pricing-server=resort_pricing.server:main",
        ],
    },
    python_requires=">=3.9",
)
