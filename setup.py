"""Install the redisstore session store package."""

from setuptools import setup, find_packages

setup(
    name='redisstore',
    version='0.1.0',
    description='Server-side sessions in Redis with signed cookie tokens',
    packages=find_packages(include=['redisstore', 'redisstore.*'],
                           exclude=['*test*']),
    python_requires='>=3.8',
    install_requires=[
        "redis>=4.1",
        "pyjwt>=2.0",
        "python-json-logger>=3.1",
        "click",
    ],
    extras_require={
        'fake': ["fakeredis"],
        'test': ["pytest", "fakeredis"],
    },
    entry_points={
        'console_scripts': ['redisstore=redisstore.cli:main'],
    },
    zip_safe=False
)
