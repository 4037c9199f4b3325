"""GraphQL query and mutation constants for GitHub Projects (v2).

Every operation is named so that logs (and test fakes) can tell them apart.
"""

RESOLVE_OWNER = """
query ResolveOwner($login: String!) {
  organization(login: $login) { id login }
  user(login: $login) { id login }
}
"""

FETCH_REPOSITORY = """
query FetchRepository($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) { id nameWithOwner url }
}
"""

SEARCH_ORGANIZATION_PROJECTS = """
query SearchOrganizationProjects($login: String!, $search: String!, $first: Int!, $after: String) {
  owner: organization(login: $login) {
    projectsV2(first: $first, after: $after, query: $search, orderBy: {field: NUMBER, direction: DESC}) {
      nodes { id number title shortDescription public url }
      pageInfo { hasNextPage endCursor }
    }
  }
}
"""

SEARCH_USER_PROJECTS = """
query SearchUserProjects($login: String!, $search: String!, $first: Int!, $after: String) {
  owner: user(login: $login) {
    projectsV2(first: $first, after: $after, query: $search, orderBy: {field: NUMBER, direction: DESC}) {
      nodes { id number title shortDescription public url }
      pageInfo { hasNextPage endCursor }
    }
  }
}
"""

FETCH_PROJECT_BY_NUMBER = """
query FetchProjectByNumber($login: String!, $number: Int!) {
  user(login: $login) { project: projectV2(number: $number) { id number title url } }
  organization(login: $login) { project: projectV2(number: $number) { id number title url } }
}
"""

CREATE_PROJECT = """
mutation CreateProject($input: CreateProjectV2Input!) {
  createProjectV2(input: $input) {
    projectV2 { id number title shortDescription public url }
  }
}
"""

UPDATE_PROJECT = """
mutation UpdateProject($input: UpdateProjectV2Input!) {
  updateProjectV2(input: $input) {
    projectV2 { id number title shortDescription public url }
  }
}
"""

FETCH_LINKED_REPOSITORIES = """
query FetchLinkedRepositories($projectId: ID!, $first: Int!, $after: String) {
  node(id: $projectId) {
    ... on ProjectV2 {
      repositories(first: $first, after: $after) {
        nodes { id nameWithOwner }
        pageInfo { hasNextPage endCursor }
      }
    }
  }
}
"""

LINK_PROJECT_TO_REPOSITORY = """
mutation LinkProjectToRepository($input: LinkProjectV2ToRepositoryInput!) {
  linkProjectV2ToRepository(input: $input) { repository { id } }
}
"""

FETCH_PROJECT_FIELDS = """
query FetchProjectFields($projectId: ID!, $first: Int!, $after: String) {
  node(id: $projectId) {
    ... on ProjectV2 {
      fields(first: $first, after: $after, orderBy: {field: POSITION, direction: ASC}) {
        nodes {
          ... on ProjectV2FieldCommon { id name dataType }
          ... on ProjectV2SingleSelectField { id name dataType options { id name color } }
        }
        pageInfo { hasNextPage endCursor }
      }
    }
  }
}
"""

CREATE_FIELD = """
mutation CreateField($input: CreateProjectV2FieldInput!) {
  createProjectV2Field(input: $input) {
    projectV2Field {
      ... on ProjectV2FieldCommon { id name dataType }
      ... on ProjectV2SingleSelectField { id name dataType options { id name color } }
    }
  }
}
"""

UPDATE_FIELD = """
mutation UpdateField($input: UpdateProjectV2FieldInput!) {
  updateProjectV2Field(input: $input) {
    projectV2Field {
      ... on ProjectV2FieldCommon { id name dataType }
      ... on ProjectV2SingleSelectField { id name dataType options { id name color } }
    }
  }
}
"""

FETCH_PROJECT_ITEMS = """
query FetchProjectItems($projectId: ID!, $first: Int!, $after: String) {
  node(id: $projectId) {
    ... on ProjectV2 {
      items(first: $first, after: $after) {
        nodes {
          id
          content {
            __typename
            ... on Issue { id number state labels(first: 20) { nodes { name } } }
            ... on PullRequest { id number state merged labels(first: 20) { nodes { name } } }
          }
          fieldValues(first: 50) {
            nodes {
              ... on ProjectV2ItemFieldSingleSelectValue {
                optionId
                field { ... on ProjectV2FieldCommon { id } }
              }
            }
          }
        }
        pageInfo { hasNextPage endCursor }
      }
    }
  }
}
"""

FETCH_REPOSITORY_ISSUES = """
query FetchRepositoryIssues($owner: String!, $name: String!, $first: Int!, $after: String) {
  repository(owner: $owner, name: $name) {
    issues(first: $first, after: $after, states: [OPEN, CLOSED]) {
      nodes { __typename id number state labels(first: 20) { nodes { name } } }
      pageInfo { hasNextPage endCursor }
    }
  }
}
"""

FETCH_REPOSITORY_PULL_REQUESTS = """
query FetchRepositoryPullRequests($owner: String!, $name: String!, $first: Int!, $after: String) {
  repository(owner: $owner, name: $name) {
    pullRequests(first: $first, after: $after, states: [OPEN, CLOSED, MERGED]) {
      nodes { __typename id number state merged labels(first: 20) { nodes { name } } }
      pageInfo { hasNextPage endCursor }
    }
  }
}
"""

ADD_PROJECT_ITEM = """
mutation AddProjectItem($input: AddProjectV2ItemByIdInput!) {
  addProjectV2ItemById(input: $input) { item { id } }
}
"""

UPDATE_ITEM_FIELD_VALUE = """
mutation UpdateItemFieldValue($input: UpdateProjectV2ItemFieldValueInput!) {
  updateProjectV2ItemFieldValue(input: $input) { projectV2Item { id } }
}
"""
