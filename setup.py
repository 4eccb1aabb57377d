from setuptools import setup, find_packages

setup(
    name="azure-mcp-tools",
    version="0.1.0",
    description="MCP tools for Azure Monitor Logs and Azure Storage",
    author="MCP Team",
    packages=find_packages(exclude=["*.tests", "*.tests.*"]),
    install_requires=[
        "pydantic>=2.0.0",
        "mcp>=1.2.0,<2",
        "starlette>=0.27.0",
        "uvicorn>=0.23.0",
        "click>=8.0.0",
        "azure-core>=1.29.0",
        "azure-identity>=1.15.0",
        "azure-monitor-query>=1.2.0",
        "azure-storage-blob>=12.19.0",
        "azure-mgmt-storage>=21.0.0",
        "aiohttp>=3.9.0",
        "isodate>=0.6.1",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "black>=22.0.0",
            "isort>=5.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "azure-mcp-tools=server.main:main",
        ],
    },
    python_requires=">=3.10",
)
