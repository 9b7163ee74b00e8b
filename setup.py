"""
Station Lottery Backend - Build Script

This script packages the station_lottery FastAPI service.
"""

from setuptools import setup, find_packages


setup(
    name='station-lottery',
    version='2.1.0',
    author='Station Lottery Team',
    description='Random reachable-station lottery engine and API for Japanese rail networks',
    long_description='''
    Picks a random station reachable from a departure point within a
    travel-time budget, optionally constrained to a prefecture (or a
    postal-code subdivision of one) and a line. Station and line data
    come from the HeartRails Express API.
    ''',
    packages=find_packages(include=['station_lottery', 'station_lottery.*']),
    install_requires=[
        'fastapi>=0.110.0',
        'uvicorn[standard]>=0.27.0',
        'pydantic>=2.0',
        'python-dotenv>=1.0.0',
        'httpx>=0.27.0',
        'redis>=5.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.4',
            'pytest-asyncio>=0.23',
            'pytest-mock>=3.12',
        ],
    },
    zip_safe=False,
    python_requires='>=3.9',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Scientific/Engineering :: GIS',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
)
