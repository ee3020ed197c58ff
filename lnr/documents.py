"""GraphQL documents, one per API operation."""

_STATE_FIELDS = "state { id name position }"

_ISSUE_FIELDS = f"""
    id
    identifier
    title
    description
    url
    branchName
    {_STATE_FIELDS}
"""

_COMMENT_FIELDS = """
    body
    createdAt
    editedAt
    url
    user { displayName }
"""

_ISSUE_DETAIL_FIELDS = f"""
    {_ISSUE_FIELDS}
    children {{
      nodes {{
        {_ISSUE_FIELDS}
      }}
    }}
    comments(filter: {{ parent: {{ null: true }} }}) {{
      nodes {{
        {_COMMENT_FIELDS}
        children {{
          nodes {{
            {_COMMENT_FIELDS}
          }}
        }}
      }}
    }}
"""

VIEWER = """
query Viewer {
  viewer {
    id
    name
    teamMemberships {
      nodes {
        team {
          id
          name
          projects {
            nodes {
              id
              name
            }
          }
        }
      }
    }
  }
}
"""

TEAM_STATES = """
query TeamStates($id: String!) {
  team(id: $id) {
    id
    name
    states {
      nodes {
        id
        name
        position
      }
    }
  }
}
"""

ISSUE_CREATE = """
mutation IssueCreate(
  $title: String!
  $teamId: String!
  $priority: Int
  $assigneeId: String
  $description: String
  $parentId: String
  $stateId: String
  $projectId: String
) {
  issueCreate(input: {
    title: $title
    priority: $priority
    teamId: $teamId
    assigneeId: $assigneeId
    stateId: $stateId
    description: $description
    parentId: $parentId
    projectId: $projectId
  }) {
    issue {
      id
      identifier
      url
    }
  }
}
"""

ISSUE_UPDATE = """
mutation IssueUpdate($id: String!, $description: String) {
  issueUpdate(id: $id, input: { description: $description }) {
    issue {
      id
      identifier
      url
    }
  }
}
"""

ISSUE_BY_BRANCH = f"""
query IssueByBranch($branchName: String!) {{
  issueVcsBranchSearch(branchName: $branchName) {{
    {_ISSUE_DETAIL_FIELDS}
  }}
}}
"""

ISSUE_BY_ID = f"""
query IssueById($id: String!) {{
  issue(id: $id) {{
    {_ISSUE_DETAIL_FIELDS}
  }}
}}
"""

ISSUE_LIST = f"""
query IssueList($filter: IssueFilter) {{
  issues(filter: $filter, first: 50) {{
    nodes {{
      {_ISSUE_FIELDS}
      children {{
        nodes {{
          {_ISSUE_FIELDS}
        }}
      }}
    }}
  }}
}}
"""
