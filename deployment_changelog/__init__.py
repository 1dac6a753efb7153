"""Builds deployment changelogs from Bitbucket, Jira and Spinnaker Managed Delivery."""
