"""GraphQL documents for the Shopify Admin API."""

# products: one page of parent products, their variants, and per-location stock
PRODUCTS_QUERY = """
query CatalogPage($first: Int!, $after: String, $variantsFirst: Int!, $levelsFirst: Int!) {
  products(first: $first, after: $after) {
    edges {
      cursor
      node {
        id
        title
        featuredImage {
          url
        }
        variants(first: $variantsFirst) {
          edges {
            node {
              id
              sku
              inventoryItem {
                id
                inventoryLevels(first: $levelsFirst) {
                  edges {
                    node {
                      available
                    }
                  }
                }
              }
            }
          }
        }
      }
    }
    pageInfo {
      hasNextPage
    }
  }
}
"""

SHOP_QUERY = "{ shop { name } }"
