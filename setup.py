from setuptools import setup

setup(name='agentscan',
      version='0.1',
      description='Classify HTTP user agents into browser, platform, device and device type',
      url='http://github.com/agentscan/agentscan',
      author='Ivan Itzcovich - Federico Bond',
      install_requires=[
          'crawlerdetect',
          'tabulate',
          'ua-parser',
      ],
      extras_require={
          'test': ['pytest'],
          'dev': ['yapf'],
      },
      packages=['agentscan', 'agentscan.tools'],
      package_data={'agentscan': ['db/*.json']},
      entry_points={
          'console_scripts': ['agentscan=agentscan.main:main'],
      },
      )
