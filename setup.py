from setuptools import find_packages, setup

setup(
    name='spacemouse-bridge',
    version='0.1.0',
    description='Session/bridge layer exposing 3Dconnexion SpaceMouse devices through a privileged helper process',
    author='isantolin',
    author_email='',
    packages=find_packages(include=['spacemousebridge', 'spacemousebridge.*']),
    python_requires='>=3.12',
    install_requires=[
        'msgspec',
        'transitions',
        'tenacity',
        'psutil',
        'marshmallow',
        "uvloop; sys_platform != 'win32'",
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
        ],
    },
    entry_points={
        'console_scripts': [
            'spacemouse-monitor=spacemousebridge.monitor:main',
        ],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: MacOS :: MacOS X',
        'Operating System :: POSIX',
    ],
)
