"""GitHub Actions workflow generator.

Renders a workflow that keeps a bucket in step with a branch after the
first deployment has been done by the service.
"""

import re

_BUCKET_NAME = re.compile(r"^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$")


def render_deploy_workflow(bucket_name: str, region: str, branch: str) -> str:
    """Render the workflow YAML for ``bucket_name``.

    AWS credentials are read from the repository secrets
    ``AWS_ACCESS_KEY_ID`` and ``AWS_SECRET_ACCESS_KEY``; they are never
    written into the file.
    """
    if not _BUCKET_NAME.match(bucket_name):
        raise ValueError(f"Invalid bucket name: {bucket_name!r}")

    return f"""name: Deploy to S3

on:
  push:
    branches:
      - "{branch}"
  workflow_dispatch:

permissions:
  contents: read

jobs:
  deploy:
    runs-on: ubuntu-latest
    steps:
      - name: Checkout
        uses: actions/checkout@v4

      - name: Configure AWS credentials
        uses: aws-actions/configure-aws-credentials@v4
        with:
          aws-access-key-id: ${{{{ secrets.AWS_ACCESS_KEY_ID }}}}
          aws-secret-access-key: ${{{{ secrets.AWS_SECRET_ACCESS_KEY }}}}
          aws-region: {region}

      - name: Sync to S3
        run: aws s3 sync . "s3://{bucket_name}" --exclude ".git/*" --exclude ".github/*"
"""
