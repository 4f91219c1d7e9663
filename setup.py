
import io
import re
import setuptools

with io.open('src/aic/__init__.py', encoding='utf8') as fp:
  version = re.search(r"__version__\s*=\s*[\"'](.*)[\"']", fp.read()).group(1)

with io.open('README.md', encoding='utf8') as fp:
  long_description = fp.read()

requirements = [
  'cleo >=2.1.0,<3.0.0',
  'databind.core >=4.4.0,<5.0.0',
  'databind.json >=4.4.0,<5.0.0',
  'importlib-metadata >=4.4.0',
  'requests >=2.22.0,<3.0.0',
  'termcolor >=2.4.0,<3.0.0',
  'tomli >=2.0.0,<3.0.0',
]

setuptools.setup(
  name = 'aic',
  version = version,
  description = 'Fetch and display the changelogs of AI coding agents from the command-line.',
  long_description = long_description,
  long_description_content_type = 'text/markdown',
  license = 'MIT',
  packages = setuptools.find_packages('src', ['test', 'test.*', 'docs', 'docs.*']),
  package_dir = {'': 'src'},
  include_package_data = False,
  install_requires = requirements,
  extras_require = {
    'test': ['pytest >=7.0.0'],
  },
  python_requires = '>=3.10',
  entry_points = {
    'console_scripts': [
      'aic = aic.__main__:main',
    ],
    'aic.plugins.application': [
      'latest = aic.ext.application.latest:LatestCommandPlugin',
      'list-sources = aic.ext.application.list_sources:ListSourcesCommand',
      'show = aic.ext.application.show:ShowCommandPlugin',
    ],
  }
)
